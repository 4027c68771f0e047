"""
Data models for the metadata analyzer
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass
class RawPageData:
    """Tags and text exactly as found on a page by one extraction attempt"""
    title: str = ""
    description: str = ""
    content: str = ""
    open_graph_tags: Dict[str, str] = field(default_factory=dict)
    twitter_tags: Dict[str, str] = field(default_factory=dict)
    json_ld: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class OpenGraphTags:
    """Normalized OpenGraph record, every field resolved to a value"""
    title: str
    description: str
    image: str
    url: str
    type: str
    site_name: str
    locale: str
    image_alt: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "url": self.url,
            "type": self.type,
            "siteName": self.site_name,
            "locale": self.locale,
            "imageAlt": self.image_alt,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "OpenGraphTags":
        return cls(
            title=data["title"],
            description=data["description"],
            image=data["image"],
            url=data["url"],
            type=data["type"],
            site_name=data["siteName"],
            locale=data["locale"],
            image_alt=data["imageAlt"],
        )


@dataclass(frozen=True)
class TwitterTags:
    """Normalized Twitter Card record"""
    card: str
    title: str
    description: str
    image: str
    site: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "card": self.card,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "site": self.site,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "TwitterTags":
        return cls(**{key: data[key] for key in ("card", "title", "description", "image", "site")})


@dataclass(frozen=True)
class AISuggestion:
    """One suggestion produced by the AI pass"""
    type: str
    level: str
    message: str
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"type": self.type, "level": self.level, "message": self.message}
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AISuggestion":
        return cls(
            type=data["type"],
            level=data["level"],
            message=data["message"],
            suggestion=data.get("suggestion"),
        )


@dataclass(frozen=True)
class UrlAnalysisResult:
    """Everything one analysis of a URL produced"""
    url: str
    title: str
    description: str
    open_graph_tags: OpenGraphTags
    twitter_tags: TwitterTags
    json_ld: List[Any]
    ai_suggestions: List[AISuggestion]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "openGraphTags": self.open_graph_tags.to_dict(),
            "twitterTags": self.twitter_tags.to_dict(),
            "jsonLd": list(self.json_ld),
            "aiSuggestions": [s.to_dict() for s in self.ai_suggestions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UrlAnalysisResult":
        return cls(
            url=data["url"],
            title=data["title"],
            description=data["description"],
            open_graph_tags=OpenGraphTags.from_dict(data["openGraphTags"]),
            twitter_tags=TwitterTags.from_dict(data["twitterTags"]),
            json_ld=list(data.get("jsonLd") or []),
            ai_suggestions=[AISuggestion.from_dict(s) for s in data.get("aiSuggestions") or []],
        )


@dataclass(frozen=True)
class UrlAnalysis:
    """A stored analysis: the result plus its id and creation timestamp"""
    id: int
    created_at: str
    result: UrlAnalysisResult

    @property
    def url(self) -> str:
        return self.result.url

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id}
        data.update(self.result.to_dict())
        data["createdAt"] = self.created_at
        return data


@dataclass
class GeneratedTags:
    """Data structure for a stored tag-generation request"""
    id: int
    title: str
    description: str
    url: str
    type: str
    image: Optional[str]
    site_name: Optional[str]
    generated_code: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "url": self.url,
            "siteName": self.site_name,
            "type": self.type,
            "generatedCode": self.generated_code,
            "createdAt": self.created_at,
        }
