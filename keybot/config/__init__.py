"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .core import Core
from .dispatch import Dispatch
from .store import Store

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("discord").setLevel(logging.WARNING)

_RAW_CONFIG = load_raw_config()

core = Core(_RAW_CONFIG)
dispatch = Dispatch(_RAW_CONFIG)
store = Store(_RAW_CONFIG)


class Config:
    core = core
    dispatch = dispatch
    store = store


__all__ = ["core", "dispatch", "store", "Config"]
