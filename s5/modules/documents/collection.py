"""Collection factory - binds Document subclasses to a collection and client."""

from s5.core.client import S5Client
from s5.modules.documents.models import Document


def create_collection(collection: str, client: S5Client) -> type[Document]:
    """
    Create a Document subclass whose operations target ``/{collection}``.

    The class name is derived from the collection, e.g. ``user_profiles``
    becomes ``UserProfilesDocument``.
    """
    name = "".join(part.capitalize() for part in collection.replace("-", "_").split("_"))
    return type(
        f"{name}Document",
        (Document,),
        {"client": client, "collection_name": collection, "__module__": Document.__module__},
    )
