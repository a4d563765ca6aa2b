import datetime
from typing import Union

from yarl import URL

LooseExpires = Union[None, int, float, str, datetime.datetime]
StrOrURL = Union[str, URL]
