from typing import Any
from collections.abc import Callable


# Type aliases for spreadsheet values (rows of cells, as returned by the values API)
type SheetRow = list[str]
type SheetValues = list[list[str]]

# Type aliases for Python dictionaries
type AppConfig = dict[str, Any]
type ServiceAccountInfo = dict[str, Any]

# Returns True when the candidate short code is ALREADY taken
type ExistsCheck = Callable[[str], bool]

# Returns an integer in [0, max_exclusive)
type RandomInt = Callable[[int], int]
