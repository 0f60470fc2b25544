"""
Error types shared by the clustering engines.
"""


class InvalidParameter(ValueError):
    """
    Raised when an image buffer or an algorithm parameter is malformed.

    Engines validate their inputs before doing any work, so when this is
    raised no labels or centroids have been produced.
    """
