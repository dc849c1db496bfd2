"""Convert images into raw audio tracks that show as pictures on burned CDs and DVDs, and preview tracks as disc images."""

__version__ = "1.0.0"