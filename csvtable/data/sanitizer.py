"""文本清洗器：问题字符归一化 + 标记保留字符转义."""

import re
from typing import Any, Dict, Optional

from loguru import logger

# 归一化写入的数字字符引用先用哨兵字符代替 "&"，转义完成后再还原，
# 这样转义阶段不会把刚写入的引用变成 "&#38;#8226;"
SENTINEL = "\x00"

# XML 1.0 不允许的字符（含哨兵），写回文档前必须去掉
INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

# 常见问题字符 -> Unicode 码位
PROBLEM_CHARACTERS: Dict[str, int] = {
    "\u2022": 8226,  # 项目符号
    "\u2018": 8216,  # 左单引号
    "\u2019": 8217,  # 右单引号
    "\u201c": 8220,  # 左双引号
    "\u201d": 8221,  # 右双引号
    "\u2013": 8211,  # 短破折号
    "\u2014": 8212,  # 长破折号
}

ESCAPES = str.maketrans({
    "&": "&#38;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
    "%": "&#37;",  # 防止下游模板/格式化插值
    "+": "&#43;",
})


def _misdecode(char: str, codec: str) -> str:
    """把字符的UTF-8字节按单字节编码错误解码，得到乱码形式.

    codec 中未定义的字节按 latin-1 保留原值，与 Windows 上常见的乱码表现一致。
    """
    pieces = []
    for byte in char.encode("utf-8"):
        try:
            pieces.append(bytes([byte]).decode(codec))
        except UnicodeDecodeError:
            pieces.append(chr(byte))
    return "".join(pieces)


def build_normalization_table(characters: Dict[str, int]) -> Dict[str, int]:
    """生成归一化表.

    每个问题字符生成四种形式：字符本身、cp1252 单字节按 latin-1 读入的形式、
    UTF-8 字节按 cp1252 解码的乱码、UTF-8 字节按 latin-1 解码的乱码。

    Args:
        characters: {问题字符: 码位}

    Returns:
        {待替换序列: 码位}
    """
    table: Dict[str, int] = {}
    for char, code_point in characters.items():
        table[char] = code_point
        try:
            table[char.encode("cp1252").decode("latin-1")] = code_point
        except UnicodeEncodeError:
            pass
        table[_misdecode(char, "cp1252")] = code_point
        table[_misdecode(char, "latin-1")] = code_point
    return table


class TextSanitizer:
    """文本清洗器.

    先去掉XML非法字符，再归一化、转义，归一化结果用哨兵保护，最后还原为 ``&#NNNN;``。
    制表符、换行和回车保留。
    """

    def __init__(self, extra_characters: Optional[Dict[str, int]] = None) -> None:
        """初始化文本清洗器.

        Args:
            extra_characters: 额外的问题字符 {字符: 码位}，会和默认表合并
        """
        characters = dict(PROBLEM_CHARACTERS)
        if extra_characters:
            characters.update(extra_characters)
        self.table = build_normalization_table(characters)
        self.pattern = self._compile(self.table)
        logger.debug(f"文本清洗器已初始化，共 {len(self.table)} 条归一化规则")

    @staticmethod
    def _compile(table: Dict[str, int]) -> re.Pattern:
        # 长序列优先，乱码形式里可能包含其他问题字符
        ordered = sorted(table, key=len, reverse=True)
        return re.compile("|".join(re.escape(seq) for seq in ordered))

    def normalize(self, value: str) -> str:
        """把问题字符替换为带哨兵的数字字符引用."""
        return self.pattern.sub(lambda m: f"{SENTINEL}#{self.table[m.group(0)]};", value)

    def sanitize(self, value: Any) -> str:
        """归一化并转义文本.

        Args:
            value: 任意输入，None 返回空字符串，非字符串先转为字符串

        Returns:
            可以直接放进标记中的文本
        """
        if value is None:
            return ""
        if not isinstance(value, str):
            value = str(value)
        if not value:
            return ""

        # 输入里原有的哨兵字符和XML非法字符直接丢弃，哨兵不能被还原成 "&"
        value = INVALID_XML_CHARS.sub("", value)
        value = self.normalize(value)
        value = value.translate(ESCAPES)
        return value.replace(SENTINEL, "&")


_default_sanitizer: Optional[TextSanitizer] = None


def sanitize(value: Any) -> str:
    """使用默认规则清洗文本."""
    global _default_sanitizer
    if _default_sanitizer is None:
        _default_sanitizer = TextSanitizer()
    return _default_sanitizer.sanitize(value)
