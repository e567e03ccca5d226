"""占位符匹配与文档树扫描测试."""

import pytest

from conftest import MemoryNode, branch, text_node
from csvtable.data.errors import MissingRootError
from csvtable.data.models import HandleState
from csvtable.data.placeholder import PlaceholderPattern
from csvtable.data.scanner import DocumentTreeScanner, natural_key


@pytest.fixture
def pattern():
    """默认占位符匹配规则."""
    return PlaceholderPattern("#table#", ["p"])


@pytest.fixture
def scanner(pattern):
    """按名称排序子节点的扫描器."""
    return DocumentTreeScanner(pattern, "formattedtext", sort_children=True)


@pytest.mark.parametrize("text", [
    "<p>#table#</p>",
    "<P>#table#</p>",
    "<p class=\"intro\" id='x'>#table#</P>",
    "<p>  #table#\t</p >",
    "<p>\xa0#table#\xa0</p>",
    "<p>&nbsp;#table#&#160;</p>",
    "<p>&#xA0;#table#</p>",
    "<h1>title</h1><p>#table#</p>",
])
def test_pattern_matches(pattern, text):
    """测试容错匹配."""
    assert pattern.contains(text)


@pytest.mark.parametrize("text", [
    None,
    "",
    "#table#",
    "<p>#table# extra</p>",
    "<p>see #table#</p>",
    "<pre>#table#</pre>",
    "<p>#table#</div>",
    "<p>#TABLE#</p>",
    "<p><b>#table#</b></p>",
])
def test_pattern_does_not_match(pattern, text):
    """测试不符合占位符规则的文本."""
    assert not pattern.contains(text)


def test_pattern_search_returns_first(pattern):
    """测试只返回第一个匹配."""
    text = "<p>a</p><p>#table#</p><p> #table# </p>"
    match = pattern.search(text)
    assert match.start() == len("<p>a</p>")
    assert match.group(0) == "<p>#table#</p>"


def test_pattern_custom_tags_and_token():
    """测试自定义标签和占位符."""
    pattern = PlaceholderPattern("{{grid}}", ["p", "div"])
    assert pattern.contains("<DIV>{{grid}}</div>")
    assert not pattern.contains("<div>{{grid}}</p>")


def test_pattern_requires_tags():
    """测试标签列表不能为空."""
    with pytest.raises(ValueError):
        PlaceholderPattern("#table#", [])


def test_scan_finds_nested_placeholder(scanner, placeholder_tree):
    """测试找到嵌套节点中的占位符."""
    root, target = placeholder_tree
    handle = scanner.scan(root)
    assert handle.found
    assert handle.node is target
    assert handle.state is HandleState.MATCHED
    assert handle.path == "root/notes/id-00001/text"


def test_scan_ignores_non_container_nodes(scanner):
    """测试只检查富文本节点."""
    root = branch("root", name=MemoryNode("name", "string", "<p>#table#</p>"))
    handle = scanner.scan(root)
    assert not handle.found
    assert handle.state is HandleState.IDLE
    assert handle.node is None


def test_scan_without_placeholder(scanner):
    """测试没有占位符的文档树."""
    root = branch("root", a=text_node("a", "<p>nothing</p>"), b=branch("b"))
    assert not scanner.scan(root).found


def test_scan_root_is_checked(scanner):
    """测试根节点本身也会被检查."""
    root = text_node("root", "<p>#table#</p>")
    assert scanner.scan(root).node is root


def test_scan_missing_root(scanner):
    """测试根节点不可用."""
    with pytest.raises(MissingRootError):
        scanner.scan(None)


def test_scan_first_match_in_sorted_order(scanner):
    """测试多个匹配时返回按名称排序遍历的第一个."""
    first = text_node("z", "<p>#table#</p>")
    second = text_node("b", "<p>#table#</p>")
    root = branch("root", b=second, a=branch("a", z=first))
    assert scanner.scan(root).node is first


def test_scan_numbered_siblings_in_natural_order(scanner):
    """测试编号的兄弟节点按数值顺序遍历."""
    second = text_node("n2", "<p>#table#</p>")
    tenth = text_node("n10", "<p>#table#</p>")
    root = branch("root", n10=tenth, n2=second, n1=MemoryNode("n1"))
    handle = scanner.scan(root)
    assert handle.node is second
    assert handle.path == "root/n2"


@pytest.mark.parametrize("names, expected", [
    (["item[10]", "item[2]", "item[1]"], ["item[1]", "item[2]", "item[10]"]),
    (["id-00010", "id-00002"], ["id-00002", "id-00010"]),
    (["b", "a10", "a9", "10", "9"], ["9", "10", "a9", "a10", "b"]),
])
def test_natural_key(names, expected):
    """测试自然排序键."""
    assert sorted(names, key=natural_key) == expected


def test_scan_unsorted_uses_mapping_order(pattern):
    """测试关闭排序时按映射自身顺序遍历."""
    first = text_node("z", "<p>#table#</p>")
    second = text_node("b", "<p>#table#</p>")
    root = branch("root", b=second, a=branch("a", z=first))
    scanner = DocumentTreeScanner(pattern, "formattedtext", sort_children=False)
    assert scanner.scan(root).node is second


def test_scan_stops_at_first_match(scanner):
    """测试找到后立即停止遍历."""
    first = text_node("a", "<p>#table#</p>")
    later = text_node("b", "<p>#table#</p>")
    root = branch("root", a=first, b=later)
    scanner.scan(root)
    assert first.get_value_calls == 1
    assert later.get_value_calls == 0


def test_scan_is_idempotent(scanner, placeholder_tree):
    """测试未修改的树重复扫描得到同一个节点."""
    root, target = placeholder_tree
    assert scanner.scan(root).node is scanner.scan(root).node is target


def test_scan_deep_tree(scanner):
    """测试很深的树不会超过递归深度."""
    target = text_node("leaf", "<p>#table#</p>")
    node = target
    for depth in range(5000):
        node = branch(f"n{depth}", child=node)
    assert scanner.scan(node).node is target
