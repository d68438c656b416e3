from stepwright.target.base import BaseTarget
from stepwright.target.page import PlaywrightTarget

__all__ = ["BaseTarget", "PlaywrightTarget"]
