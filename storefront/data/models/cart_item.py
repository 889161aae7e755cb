from sqlalchemy import Column, Integer, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    #bez FK - usuniety produkt nie kasuje pozycji, pomijamy ja przy odczycie
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    is_free = Column(Boolean, nullable=False, default=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "is_free", name="u_cart_product_free"),
    )
