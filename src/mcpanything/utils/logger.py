import logging
from pathlib import Path

logger = logging.getLogger("mcpanything")


def configure_logging(log_dir: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """設定預設 logger：一律輸出到 console，指定 log_dir 時另寫入檔案。"""

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path / "mcpanything.log", encoding="utf-8")
            file_formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger
