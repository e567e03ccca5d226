"""文档与CSV文件读写操作."""

from pathlib import Path
from typing import List, Optional, Union

from loguru import logger
from lxml import etree

from csvtable.config.settings import settings
from csvtable.data.xml_tree import XmlDocument


class DocumentIO:
    """文档读写操作类."""

    @staticmethod
    def load_document(file_path: Union[str, Path]) -> XmlDocument:
        """加载XML文档.

        Args:
            file_path: 文档路径

        Returns:
            加载的XmlDocument对象

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 文件格式不正确
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        if file_path.suffix.lower() not in ['.xml']:
            raise ValueError(f"不支持的文件类型: {file_path.suffix}")

        try:
            doc = XmlDocument.load(file_path)
            logger.info(f"已加载文档: {file_path}")
            return doc
        except (OSError, etree.XMLSyntaxError) as e:
            logger.error(f"加载文档失败: {e}")
            raise ValueError(f"加载文档失败: {e}")

    @staticmethod
    def save_document(doc: XmlDocument, output_path: Union[str, Path]) -> None:
        """保存XML文档.

        Args:
            doc: XmlDocument对象
            output_path: 输出文件路径

        Raises:
            ValueError: 保存失败
        """
        try:
            doc.save(output_path)
        except OSError as e:
            logger.error(f"保存文档失败: {e}")
            raise ValueError(f"保存文档失败: {e}")

    @staticmethod
    def open_text_file(file_path: Union[str, Path], encodings: Optional[List[str]] = None) -> Optional[str]:
        """读取文本文件.

        依次尝试配置中的编码，全部失败或文件不可读时返回None。

        Args:
            file_path: 文件路径
            encodings: 候选编码，默认读取配置

        Returns:
            文件内容，读取失败时为None
        """
        file_path = Path(file_path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            logger.error(f"读取文件失败: {file_path}: {e}")
            return None

        for encoding in encodings or settings.csv.encodings:
            try:
                text = data.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue
            logger.debug(f"已按 {encoding} 编码读取文件: {file_path}")
            return text

        logger.error(f"无法识别文件编码: {file_path}")
        return None
