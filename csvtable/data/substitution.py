"""占位符替换引擎."""

from typing import Optional

from loguru import logger

from csvtable.data.errors import NoPlaceholderFoundError, ReplacementFailedError, StaleMatchError
from csvtable.data.models import HandleState, MatchHandle, ReplacementResult
from csvtable.data.node import DocumentNode
from csvtable.data.placeholder import PlaceholderPattern


class PlaceholderSubstitutionEngine:
    """占位符替换引擎.

    只替换节点文本中第一个占位符段落，其余出现保持原样。
    句柄状态：IDLE -(扫描命中)-> MATCHED -(替换成功)-> CONSUMED；
    替换失败时保持 MATCHED，可以换输入重试；CONSUMED 之后必须重新扫描。
    """

    def __init__(self, pattern: Optional[PlaceholderPattern] = None) -> None:
        self.pattern = pattern or PlaceholderPattern()

    def substitute(self, node: DocumentNode, table_markup: str) -> ReplacementResult:
        """把节点文本中的第一个占位符段落替换为表格标记.

        只有替换次数为1时才写回节点；没有匹配时不调用 ``set_value``，节点保持不变。

        Args:
            node: 文档节点
            table_markup: 表格标记

        Returns:
            替换结果，count 为 0 或 1
        """
        text = node.get_value()
        match = self.pattern.search(text)
        if match is None:
            logger.warning(f"节点 {node.get_name()} 中没有可替换的占位符")
            return ReplacementResult(count=0, node_name=node.get_name())

        # 直接拼接，表格标记按字面插入，不做替换模板解析
        new_text = text[:match.start()] + table_markup + text[match.end():]
        node.set_value(new_text)
        logger.info(f"已将节点 {node.get_name()} 中的占位符替换为表格")
        return ReplacementResult(count=1, node_name=node.get_name())

    def check(self, handle: MatchHandle) -> DocumentNode:
        """确认句柄可用于替换，返回其引用的节点.

        Raises:
            NoPlaceholderFoundError: 句柄没有匹配或节点已不存在
            StaleMatchError: 句柄已被使用过
        """
        if handle.state is HandleState.CONSUMED:
            raise StaleMatchError("占位符已被替换，请重新扫描后再导入")

        node = handle.node
        if handle.state is HandleState.IDLE or node is None:
            raise NoPlaceholderFoundError(f"没有找到 {self.pattern.token} 占位符")
        return node

    def apply(self, handle: MatchHandle, table_markup: str) -> ReplacementResult:
        """使用匹配句柄执行替换.

        Args:
            handle: 扫描得到的匹配句柄
            table_markup: 表格标记

        Returns:
            替换结果

        Raises:
            NoPlaceholderFoundError: 句柄没有匹配或节点已不存在
            StaleMatchError: 句柄已被使用过
            ReplacementFailedError: 节点文本中已找不到占位符
        """
        node = self.check(handle)
        result = self.substitute(node, table_markup)
        if not result.success:
            raise ReplacementFailedError(f"节点 {handle.path or node.get_name()} 中的占位符已不存在")

        handle.consume()
        return result
