"""CSV解析器测试."""

import pytest

from csvtable.data.csv_decoder import CsvDecoder
from csvtable.data.errors import CsvDecodeError


@pytest.fixture
def decoder():
    """逗号分隔的CSV解析器."""
    return CsvDecoder(",")


def test_simple_rows(decoder):
    """测试基本的行列拆分."""
    assert decoder.decode("a,b\nc,d") == [["a", "b"], ["c", "d"]]


def test_empty_middle_field_and_trailing_newline(decoder):
    """测试空字段保留，结尾换行不产生空行."""
    assert decoder.decode("a,,b\n") == [["a", "", "b"]]


@pytest.mark.parametrize("raw, expected", [
    (",", [["", ""]]),
    ("a,", [["a", ""]]),
    (",a", [["", "a"]]),
    (",,\n", [["", "", ""]]),
])
def test_empty_fields(decoder, raw, expected):
    """测试各种位置的空字段."""
    assert decoder.decode(raw) == expected


@pytest.mark.parametrize("raw", ["a,b\r\nc,d\r\n", "a,b\rc,d", "a,b\nc,d\n"])
def test_line_terminators(decoder, raw):
    """测试 \\n、\\r\\n、\\r 三种换行."""
    assert decoder.decode(raw) == [["a", "b"], ["c", "d"]]


def test_blank_lines_are_skipped(decoder):
    """测试空行不生成表格行."""
    assert decoder.decode("a\n\n\r\nb\n\n") == [["a"], ["b"]]


def test_empty_input(decoder):
    """测试空字符串."""
    assert decoder.decode("") == []


def test_quoted_field_with_delimiter(decoder):
    """测试引号字段中的分隔符."""
    assert decoder.decode('"x,y",z') == [["x,y", "z"]]


def test_quoted_field_with_newline(decoder):
    """测试引号字段中的换行."""
    assert decoder.decode('"line1\nline2",b\nc,d') == [["line1\nline2", "b"], ["c", "d"]]


def test_doubled_quotes(decoder):
    """测试成对双引号."""
    assert decoder.decode('"say ""hi""",x') == [['say "hi"', "x"]]


def test_empty_quoted_field_is_a_row(decoder):
    """测试只有空引号字段的行仍然是一行."""
    assert decoder.decode('""\n') == [[""]]


def test_quote_inside_unquoted_field(decoder):
    """测试非引号字段中的引号按字面保留."""
    assert decoder.decode('ab"c,d') == [['ab"c', "d"]]


def test_text_after_closing_quote(decoder):
    """测试闭合引号后的多余字符追加到字段."""
    assert decoder.decode('"a"b,c') == [["ab", "c"]]
    assert decoder.decode('"a"b"c,d') == [['ab"c', "d"]]


def test_unterminated_quote(decoder):
    """测试引号未闭合."""
    with pytest.raises(CsvDecodeError):
        decoder.decode('a,"unterminated\nb,c')


def test_none_payload(decoder):
    """测试空内容."""
    with pytest.raises(CsvDecodeError):
        decoder.decode(None)


def test_bytes_payload(decoder):
    """测试 bytes 输入及 BOM."""
    assert decoder.decode(b"\xef\xbb\xbfa,b\n") == [["a", "b"]]


def test_undecodable_bytes(decoder):
    """测试无法按 UTF-8 解码的内容."""
    with pytest.raises(CsvDecodeError):
        decoder.decode(b"\xff\xfe,\xfa")


def test_text_bom_is_dropped(decoder):
    """测试文本开头的 BOM."""
    assert decoder.decode("\N{ZERO WIDTH NO-BREAK SPACE}a,b") == [["a", "b"]]


def test_custom_delimiter():
    """测试自定义分隔符."""
    assert CsvDecoder(";").decode("a;b,c\n1;2") == [["a", "b,c"], ["1", "2"]]
    assert CsvDecoder("\t").decode("a\t\tb") == [["a", "", "b"]]


@pytest.mark.parametrize("delimiter", ['"', "\n", "\r", ";;", ""])
def test_invalid_delimiter(delimiter):
    """测试不支持的分隔符."""
    with pytest.raises(ValueError):
        CsvDecoder(delimiter)


def test_default_delimiter_from_settings():
    """测试默认分隔符."""
    assert CsvDecoder().delimiter == ","
