from .converter import TypeConverter
from .markers import META, PROGRESS_TOKEN, Param, ProgressToken
from .meta import McpMeta
from .uri_template import UriTemplate

__all__ = ["META", "PROGRESS_TOKEN", "McpMeta", "Param", "ProgressToken", "TypeConverter", "UriTemplate"]
