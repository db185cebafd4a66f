# forecourt/garages.py
import json
import os
from typing import List
from .utils import logger


class GarageLookup:
    """Read-only list of partner garages kept in a static JSON file."""

    def __init__(self, path):
        self.path = path

    def list_all(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = fh.read().strip()
            if not raw:
                return []
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.warning("Failed loading garages from %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("Garages file %s is not a JSON array", self.path)
            return []
        return data
