from marshmallow import EXCLUDE, Schema, fields, validate, validates, ValidationError

from hardware_store.models.order import ORDER_STATUSES, PAYMENT_METHODS
from hardware_store.utils.validators import ValidationUtils


class _Base(Schema):
    class Meta:
        unknown = EXCLUDE


class AddCartItemSchema(_Base):
    product_id = fields.Str(required=True, validate=validate.Length(min=1, max=64))
    quantity = fields.Int(load_default=1, strict=True, validate=validate.Range(min=1))


class UpdateCartItemSchema(_Base):
    product_id = fields.Str(required=True, validate=validate.Length(min=1, max=64))
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=0))


class OrderLineSchema(_Base):
    product_id = fields.Str(required=True, validate=validate.Length(min=1, max=64))
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1, max=999))


class CheckoutSchema(_Base):
    shipping_address = fields.Str(required=True, validate=validate.Length(min=5, max=500))
    payment_method = fields.Str(required=True, validate=validate.OneOf(PAYMENT_METHODS))
    items = fields.List(fields.Nested(OrderLineSchema), load_default=None, validate=validate.Length(min=1))


class ProfileCreateSchema(_Base):
    email = fields.Str(required=True)
    full_name = fields.Str(load_default=None, validate=validate.Length(max=200))
    phone = fields.Str(load_default=None)
    address = fields.Str(load_default=None, validate=validate.Length(max=500))
    city = fields.Str(load_default=None, validate=validate.Length(max=100))
    country = fields.Str(load_default=None, validate=validate.Length(max=100))

    @validates("phone")
    def validate_phone(self, value, **kwargs):
        if value is not None and not ValidationUtils.validate_phone_number(value):
            raise ValidationError("Invalid phone number.")


class ProfileUpdateSchema(_Base):
    full_name = fields.Str(allow_none=True, validate=validate.Length(max=200))
    phone = fields.Str(allow_none=True)
    address = fields.Str(allow_none=True, validate=validate.Length(max=500))
    city = fields.Str(allow_none=True, validate=validate.Length(max=100))
    country = fields.Str(allow_none=True, validate=validate.Length(max=100))

    @validates("phone")
    def validate_phone(self, value, **kwargs):
        if value is not None and not ValidationUtils.validate_phone_number(value):
            raise ValidationError("Invalid phone number.")


class ProductSchema(_Base):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=ValidationUtils.MAX_NAME_LENGTH))
    description = fields.Str(allow_none=True, validate=validate.Length(max=ValidationUtils.MAX_TEXT_LENGTH))
    price = fields.Int(required=True, strict=True, validate=validate.Range(min=0))
    original_price = fields.Int(allow_none=True, strict=True, validate=validate.Range(min=0))
    image = fields.Str(allow_none=True)
    badge = fields.Str(allow_none=True, validate=validate.Length(max=50))
    category_id = fields.Int(allow_none=True, strict=True)
    stock_quantity = fields.Int(strict=True, validate=validate.Range(min=0))
    is_featured = fields.Bool()


class CategorySchema(_Base):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    slug = fields.Str(allow_none=True, validate=validate.Length(max=100))
    description = fields.Str(allow_none=True, validate=validate.Length(max=ValidationUtils.MAX_TEXT_LENGTH))
    image = fields.Str(allow_none=True)


class OrderStatusSchema(_Base):
    status = fields.Str(required=True, validate=validate.OneOf(ORDER_STATUSES, error="Invalid status value"))
