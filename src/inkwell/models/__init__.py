# Importa todos los modelos para que queden registrados en Base.metadata
from . import book, review, user, cart, wishlist, order  # noqa: F401
