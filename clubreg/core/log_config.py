"""
log_config.py

표준 logging 설정.

- 각 모듈은 logging.getLogger(__name__) 로 로거를 얻어 사용
- 여기서는 루트 포맷과 레벨만 한 번 설정 (create_app 에서 호출)
- 활동 로그는 clubreg.activity 로거로도 함께 출력됨

"""

import logging
from logging.config import dictConfig


def setup_logging(level: str = "INFO") -> None:
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "clubreg": {
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
        },
    })
    logging.getLogger(__name__).debug("Logging configured at %s", level)
