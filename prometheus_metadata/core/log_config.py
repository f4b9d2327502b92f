import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_dir: str = "log") -> Path:
    """
    配置日志：Stderr + File

    stdout 是 MCP stdio 的通信通道，所有日志只写 stderr 和文件。

    Returns:
        日志文件路径
    """
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)
    log_file = log_path / "agent.log"

    formatter = logging.Formatter(LOG_FORMAT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[stderr_handler, file_handler],
        force=True,  # 强制重新配置
    )

    # Uvicorn 的日志也去 stderr 和文件，而不是 stdout
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers = [stderr_handler, file_handler]
        logger_obj.propagate = False  # 防止双重打印

    return log_file
