"""
Exceptions raised while building the item catalog.

Every exception carries the HTTP status the API answers with when it reaches
the request boundary; the message becomes the ``error`` field of the body.
"""


class CatalogError(Exception):
    """
    Base class for all errors raised by the catalog service.
    """

    status_code: int = 500

    def __init__(self, message: str = None, status_code: int = None):
        if not message:
            message = "Unspecified problem building the catalog"
        super(CatalogError, self).__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigMissing(CatalogError):
    """
    A required setting (root folder id or service credentials) is not available.
    Raised before any remote call is made.
    """

    status_code = 500


class ClientInitFailed(CatalogError):
    """
    The storage client could not be created from the configured credentials.
    """

    status_code = 500


class ListingFailed(CatalogError):
    """
    Listing the children of a folder failed.

    :param str folder_id:  the folder whose listing failed
    """

    status_code = 500

    def __init__(self, message: str = None, folder_id: str = None):
        super(ListingFailed, self).__init__(message)
        self.folder_id = folder_id


class MetadataReadFailed(CatalogError):
    """
    Downloading or converting an item's metadata file failed.

    :param str file_id:  the metadata file that could not be read
    """

    status_code = 500

    def __init__(self, message: str = None, file_id: str = None):
        super(MetadataReadFailed, self).__init__(message)
        self.file_id = file_id


class MethodNotAllowed(CatalogError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super(MethodNotAllowed, self).__init__(message)
