"""日志配置模块."""

import sys
from pathlib import Path

from loguru import logger

from csvtable.config.settings import settings


def setup_logger() -> None:
    """配置日志系统.

    设置日志格式、级别和输出位置。
    """
    # 清除默认的日志配置
    logger.remove()

    # 添加控制台日志处理器
    logger.add(
        sys.stderr,
        format=settings.log.format,
        level=settings.log.level,
        colorize=True,
    )

    # 添加文件日志处理器(如果已配置)
    if settings.log.log_file:
        log_path = Path(settings.log.log_file)
        if not log_path.is_absolute():
            log_path = settings.project_dir / log_path
        logger.add(
            log_path,
            format=settings.log.format,
            level=settings.log.level,
            rotation=settings.log.rotation,
            retention=settings.log.retention,
        )

    logger.debug(f"日志系统已初始化，级别：{settings.log.level}")

# 注意：不在模块级别调用setup_logger()，避免重复初始化
# 初始化将在 csvtable/__init__.py 中进行
