"""資源 URI template 的變數解析與比對。"""
from __future__ import annotations

import re
from typing import Dict, Tuple

from mcpanything.exceptions import BindingError, TemplateExtractionError

_VARIABLE = re.compile(r"\{([+#]?)([^{}]+)\}")


class UriTemplate:
    """支援 ``{name}`` 與 ``{+name}``（可跨越 ``/``）兩種 placeholder。"""

    def __init__(self, template: str) -> None:
        self.template = template
        variables: list[str] = []
        pattern_parts: list[str] = []
        cursor = 0
        for index, match in enumerate(_VARIABLE.finditer(template)):
            operator, name = match.group(1), match.group(2).strip()
            if name in variables:
                raise BindingError(f"Duplicate URI variable '{name}' in template: {template}")
            pattern_parts.append(re.escape(template[cursor : match.start()]))
            value_pattern = ".+?" if operator else "[^/]+?"
            # 變數名稱不一定是合法的 group 名稱，改用位置命名
            pattern_parts.append(f"(?P<v{index}>{value_pattern})")
            variables.append(name)
            cursor = match.end()
        pattern_parts.append(re.escape(template[cursor:]))

        self.variables: Tuple[str, ...] = tuple(variables)
        self._pattern = re.compile("".join(pattern_parts))

    @property
    def is_template(self) -> bool:
        return bool(self.variables)

    def matches(self, uri: str) -> bool:
        return self._pattern.fullmatch(uri) is not None

    def extract(self, uri: str) -> Dict[str, str]:
        """依位置比對取出變數值，URI 形狀不符時拋出 TemplateExtractionError。"""

        match = self._pattern.fullmatch(uri or "")
        if match is None:
            raise TemplateExtractionError(
                f"Failed to extract all URI variables from request URI: {uri}. "
                f"Expected variables: {list(self.variables)}, but found: []",
                uri=uri,
                template=self.template,
                expected=self.variables,
            )
        return {name: match.group(f"v{index}") for index, name in enumerate(self.variables)}

    def __repr__(self) -> str:
        return f"UriTemplate({self.template!r})"
