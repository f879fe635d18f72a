from mcpanything.utils.docstring_parser import parse_docstring


def documented(city: str, days: int = 3):
    """查詢城市的天氣預報。

    會呼叫外部服務。

    Args:
        city (str): 城市名稱，
            例如 Taipei
        days: 預報天數
    Returns:
        每日預報的 list
    Raises:
        ValueError: 城市不存在
    """


def chinese_sections(topic):
    """產生摘要

    參數:
        topic: 主題
    回傳:
        摘要文字
    """


def undocumented(value):
    return value


def test_google_style_sections_are_parsed():
    doc = parse_docstring(documented)

    assert doc.summary == "查詢城市的天氣預報。"
    assert doc.parameters == {"city": "城市名稱， 例如 Taipei", "days": "預報天數"}
    assert doc.returns == "每日預報的 list"
    assert doc.describe("missing") is None


def test_chinese_section_headers():
    doc = parse_docstring(chinese_sections)

    assert doc.summary == "產生摘要"
    assert doc.describe("topic") == "主題"
    assert doc.returns == "摘要文字"


def test_missing_docstring_returns_none():
    assert parse_docstring(undocumented) is None
