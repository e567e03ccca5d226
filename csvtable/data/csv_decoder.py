"""CSV解析器."""

from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from csvtable.config.settings import settings
from csvtable.data.errors import CsvDecodeError
from csvtable.data.models import ParsedTable

QUOTE = '"'
BOM = "\ufeff"


class _State(Enum):
    """逐字符解析状态."""

    FIELD_START = 0
    IN_UNQUOTED_FIELD = 1
    IN_QUOTED_FIELD = 2
    QUOTE_IN_QUOTED_FIELD = 3


class CsvDecoder:
    """CSV解析器.

    逐字符状态机实现，支持空字段以及 RFC-4180 风格的引号字段
    （字段内可包含分隔符、换行和成对的双引号）。空行不产生表格行。
    """

    def __init__(self, delimiter: Optional[str] = None) -> None:
        """初始化CSV解析器.

        Args:
            delimiter: 字段分隔符，默认读取配置（逗号）

        Raises:
            ValueError: 分隔符不是单个字符，或者是引号/换行符
        """
        delimiter = delimiter if delimiter is not None else settings.csv.delimiter
        if len(delimiter) != 1 or delimiter in (QUOTE, "\r", "\n"):
            raise ValueError(f"不支持的分隔符: {delimiter!r}")
        self.delimiter = delimiter

    def decode(self, raw: Union[str, bytes, None]) -> ParsedTable:
        """解析CSV文本.

        Args:
            raw: CSV文本，bytes 按 UTF-8 解码

        Returns:
            行列表，每行为单元格字符串列表

        Raises:
            CsvDecodeError: 内容为空（None）、无法解码或引号未闭合
        """
        if raw is None:
            raise CsvDecodeError("CSV内容为空")
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise CsvDecodeError(f"CSV内容无法按UTF-8解码: {e}")
        if raw.startswith(BOM):
            raw = raw[1:]

        rows: ParsedTable = []
        row: List[str] = []
        field: List[str] = []
        state = _State.FIELD_START
        # 当前记录是否有内容，空行不生成表格行
        has_content = False
        line_no = 1
        quote_line = 0

        def end_field() -> None:
            row.append("".join(field))
            field.clear()

        def end_row() -> None:
            if has_content:
                end_field()
                rows.append(list(row))
            row.clear()
            field.clear()

        i = 0
        length = len(raw)
        while i < length:
            char = raw[i]

            if state is _State.IN_QUOTED_FIELD:
                if char == QUOTE:
                    state = _State.QUOTE_IN_QUOTED_FIELD
                else:
                    if char == "\n":
                        line_no += 1
                    field.append(char)
                i += 1
                continue

            if state is _State.QUOTE_IN_QUOTED_FIELD and char == QUOTE:
                # 成对双引号表示一个字面引号
                field.append(QUOTE)
                state = _State.IN_QUOTED_FIELD
                i += 1
                continue

            if char == "\r" or char == "\n":
                end_row()
                has_content = False
                state = _State.FIELD_START
                if char == "\r" and i + 1 < length and raw[i + 1] == "\n":
                    i += 1
                line_no += 1
                i += 1
                continue

            has_content = True
            if char == self.delimiter:
                end_field()
                state = _State.FIELD_START
            elif state is _State.FIELD_START and char == QUOTE:
                state = _State.IN_QUOTED_FIELD
                quote_line = line_no
            else:
                # 非引号字段中的引号、闭合引号后的多余字符都按字面保留
                field.append(char)
                state = _State.IN_UNQUOTED_FIELD
            i += 1

        if state is _State.IN_QUOTED_FIELD:
            raise CsvDecodeError(f"第 {quote_line} 行的引号字段没有闭合")
        end_row()

        logger.debug(f"CSV解析完成，共 {len(rows)} 行")
        return rows
