"""
Construction options for Connection.
"""
from typing import Any, Callable, Dict, Mapping, Optional
from pydantic import BaseModel, Field, field_validator

from .environment import EnvironmentSnapshot
from .types import RequestPipeline
from .url import coerce_url


class ConnectionOptions(BaseModel):
    """Options accepted by Connection, as keyword arguments or a mapping."""
    model_config = {"arbitrary_types_allowed": True}

    url: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, Any] = Field(default_factory=dict)

    # None leaves the proxy to the environment, False disables it
    proxy: Any = None
    builder: Optional[Any] = None
    params_encoder: Any = None
    ignore_env_proxy: Optional[bool] = None
    environment: Optional[Callable[[], EnvironmentSnapshot]] = None

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return coerce_url(v)

    @field_validator("params", "headers", mode="before")
    @classmethod
    def validate_mapping(cls, v: Any) -> Dict[str, Any]:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError(f"expected a mapping, got {type(v).__name__}")
        return {str(key): value for key, value in v.items()}

    @field_validator("builder")
    @classmethod
    def validate_builder(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, RequestPipeline):
            raise ValueError("builder must provide a call(request) method")
        return v

    @classmethod
    def build(cls, url: Any = None, options: Any = None, **overrides: Any) -> "ConnectionOptions":
        """Merge options, then a url-or-mapping argument, then keyword overrides."""
        data: Dict[str, Any] = {}
        for source in (options, url):
            if isinstance(source, ConnectionOptions):
                data.update({key: getattr(source, key) for key in source.model_fields_set})
            elif isinstance(source, Mapping):
                data.update({str(key): value for key, value in source.items()})
            elif source is not None and source is url:
                data["url"] = source
            elif source is not None:
                raise ValueError(f"options must be a mapping, got {type(source).__name__}")
        data.update(overrides)
        return cls.model_validate(data)
