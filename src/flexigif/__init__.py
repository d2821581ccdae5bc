"""FlexiGif - turn a video into a shareable GIF and/or silent WebM."""

__version__ = "0.1.0"
