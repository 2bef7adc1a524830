import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logger(level: str = "INFO", json_output: bool = False):
    """Loguru 기본 설정. lifespan 시작 시 한 번 호출.

    json_output=True면 한 줄당 JSON 레코드 (로그 수집기용).
    request_id는 미들웨어가 contextualize로 채우고, 요청 밖에서는 "-".
    """
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    if json_output:
        logger.add(sys.stderr, level=level.upper(), serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper())
    return logger
