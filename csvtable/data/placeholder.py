"""占位符匹配规则."""

import re
from typing import Iterable, Optional

from csvtable.config.settings import settings

# 占位符两侧允许出现的空白：普通空白、不换行空格字符及其实体写法
_PADDING = r"(?:\s|&nbsp;|&#160;|&#[xX]0*[aA]0;)*"


class PlaceholderPattern:
    """容错的占位符匹配规则.

    占位符必须是某个段落类元素去掉首尾空白后的全部内容，例如
    ``<p class="x"> #table#&nbsp;</P>``。标签名不区分大小写，开标签可以带属性，
    占位符文本本身区分大小写。
    只按扁平的段落元素匹配，不处理嵌套结构。
    """

    def __init__(self, token: Optional[str] = None, tags: Optional[Iterable[str]] = None) -> None:
        """初始化占位符匹配规则.

        Args:
            token: 占位符文本，默认读取配置（#table#）
            tags: 段落类标签名，默认读取配置（p）
        """
        self.token = token if token is not None else settings.placeholder.token
        tags = list(tags) if tags is not None else list(settings.placeholder.tags)
        if not tags:
            raise ValueError("至少需要一个段落类标签")
        self.tags = tags

        tag_group = "|".join(re.escape(tag) for tag in sorted(tags, key=len, reverse=True))
        # 只有标签名不区分大小写，占位符文本按字面匹配
        self.regex = re.compile(
            rf"(?i:<({tag_group})(?:\s[^>]*)?>){_PADDING}{re.escape(self.token)}{_PADDING}(?i:</\1\s*>)"
        )

    def search(self, text: Optional[str]) -> Optional[re.Match]:
        """查找第一个占位符段落.

        Args:
            text: 节点文本

        Returns:
            匹配对象，没有找到时返回None
        """
        if not text:
            return None
        return self.regex.search(text)

    def contains(self, text: Optional[str]) -> bool:
        """文本中是否含有占位符段落."""
        return self.search(text) is not None

    def __repr__(self) -> str:
        return f"PlaceholderPattern(token='{self.token}', tags={self.tags})"
