from models.user import UserModel
from models.product import ProductModel
from models.favorite import FavoriteModel
from models.post import PostModel

__all__ = ["UserModel", "ProductModel", "FavoriteModel", "PostModel"]
