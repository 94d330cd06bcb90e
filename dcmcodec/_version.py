"""Pure python package for DICOM data-set encoding and decoding."""
import re
from typing import cast, Match


__version__: str = '1.0.0'

result = cast(Match[str], re.match(r'(\d+\.\d+\.\d+).*', __version__))
__version_info__ = tuple(result.group(1).split('.'))
