from .resolve import resolve
from .probe import probe
from .triple import triple
from .doctor import doctor
from .clean import clean
from .config import config
from .log import log
