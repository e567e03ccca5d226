"""表格渲染服务."""

from typing import Optional, Union

from loguru import logger

from csvtable.data.csv_decoder import CsvDecoder
from csvtable.data.models import ParsedTable
from csvtable.data.sanitizer import TextSanitizer
from csvtable.data.table_builder import MarkupTableBuilder


class TableRenderer:
    """把CSV文本渲染为表格标记."""

    def __init__(self, delimiter: Optional[str] = None, sanitizer: Optional[TextSanitizer] = None) -> None:
        """初始化表格渲染服务.

        Args:
            delimiter: 字段分隔符，默认读取配置
            sanitizer: 文本清洗器，为None则使用默认规则
        """
        self.decoder = CsvDecoder(delimiter)
        self.builder = MarkupTableBuilder(sanitizer)

    def decode(self, raw: Union[str, bytes, None]) -> ParsedTable:
        return self.decoder.decode(raw)

    def build(self, table: ParsedTable) -> str:
        return self.builder.build(table)

    def render(self, raw: Union[str, bytes, None]) -> str:
        """解析CSV并生成表格标记.

        Raises:
            CsvDecodeError: CSV内容为空或格式错误
        """
        table = self.decode(raw)
        markup = self.build(table)
        logger.debug(f"已生成表格标记: {len(table)} 行, {len(markup)} 字符")
        return markup
