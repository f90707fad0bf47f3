"""Back-office forms."""

from flask_wtf import FlaskForm
from wtforms import (StringField, TextAreaField, SelectField, IntegerField, FloatField,
                     BooleanField, DateTimeLocalField, SelectMultipleField)
from wtforms.validators import DataRequired, Length, NumberRange, Optional, ValidationError

from giftshop.orders.tracking import STATUS_MAP_EN_TO_VI


class ProductForm(FlaskForm):
    name = StringField('Product Name', validators=[DataRequired(), Length(max=200)])
    collection_id = SelectField('Collection', choices=[], validators=[DataRequired()])
    status = SelectField('Status', choices=[
        ('active', 'Active'), ('inactive', 'Inactive'), ('draft', 'Draft')
    ], default='active')
    has_bg = BooleanField('Has background')

    def to_payload(self):
        return {
            'name': self.name.data,
            'collectionId': self.collection_id.data,
            'status': self.status.data,
            'hasBg': self.has_bg.data,
        }


class CategoryForm(FlaskForm):
    name = StringField('Category Name', validators=[DataRequired(), Length(max=100)])
    product_id = SelectField('Product', choices=[], validators=[DataRequired()])

    def to_payload(self):
        return {'name': self.name.data, 'productId': self.product_id.data}


class PromotionForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(), Length(max=200)])
    description = TextAreaField('Description', validators=[DataRequired()])
    promo_code = StringField('Promotion code', validators=[DataRequired(), Length(max=50)])
    type = SelectField('Discount Type', choices=[
        ('PERCENTAGE', 'Percentage'),
        ('FIXED_AMOUNT', 'Fixed amount')
    ])
    value = FloatField('Value', validators=[DataRequired(), NumberRange(min=0)])
    min_order_value = FloatField('Minimum order value', validators=[Optional(), NumberRange(min=0)])
    max_discount_amount = FloatField('Maximum discount', validators=[Optional(), NumberRange(min=0)])
    start_date = DateTimeLocalField('Starts', format='%Y-%m-%dT%H:%M', validators=[DataRequired()])
    end_date = DateTimeLocalField('Ends', format='%Y-%m-%dT%H:%M', validators=[Optional()])
    usage_limit = IntegerField('Usage limit', validators=[Optional(), NumberRange(min=0)])
    is_active = BooleanField('Active', default=True)

    def validate_value(self, field):
        if self.type.data == 'PERCENTAGE' and field.data is not None and field.data > 100:
            raise ValidationError('A percentage cannot exceed 100.')

    def to_payload(self):
        payload = {
            'title': self.title.data,
            'description': self.description.data,
            'promoCode': self.promo_code.data.strip().upper(),
            'type': self.type.data,
            'value': self.value.data,
            'minOrderValue': self.min_order_value.data or 0,
            'startDate': self.start_date.data.isoformat(),
            'isActive': self.is_active.data,
        }
        if self.max_discount_amount.data:
            payload['maxDiscountAmount'] = self.max_discount_amount.data
        if self.end_date.data:
            payload['endDate'] = self.end_date.data.isoformat()
        if self.usage_limit.data:
            payload['usageLimit'] = self.usage_limit.data
        return payload


class ShippingFeeForm(FlaskForm):
    shipping_type = StringField('Shipping type', validators=[DataRequired(), Length(max=100)])
    area = StringField('Area', validators=[DataRequired(), Length(max=100)])
    estimated_delivery_time = StringField('Estimated delivery time', validators=[DataRequired(), Length(max=100)])
    shipping_fee = FloatField('Fee', validators=[DataRequired(), NumberRange(min=0)])
    notes_or_remarks = TextAreaField('Notes', validators=[Optional(), Length(max=500)])

    def to_payload(self):
        payload = {
            'shippingType': self.shipping_type.data,
            'area': self.area.data,
            'estimatedDeliveryTime': self.estimated_delivery_time.data,
            'shippingFee': self.shipping_fee.data,
        }
        if self.notes_or_remarks.data:
            payload['notesOrRemarks'] = self.notes_or_remarks.data
        return payload


class InventoryForm(FlaskForm):
    product_custom_id = StringField('Custom product ID', validators=[DataRequired()])
    current_stock = IntegerField('Current stock', default=0, validators=[Optional(), NumberRange(min=0)])
    min_stock_alert = IntegerField('Low stock alert', default=0, validators=[Optional(), NumberRange(min=0)])
    status = SelectField('Status', choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active')

    def to_payload(self):
        return {
            'productCustomId': self.product_custom_id.data,
            'currentStock': self.current_stock.data or 0,
            'minStockAlert': self.min_stock_alert.data or 0,
            'status': self.status.data,
        }


class StockAdjustmentForm(FlaskForm):
    quantity = IntegerField('Quantity (negative to remove)', validators=[DataRequired()])
    reason = StringField('Reason', validators=[Optional(), Length(max=200)])


class OrderStatusForm(FlaskForm):
    status = SelectField('Status', choices=[(label, label) for label in STATUS_MAP_EN_TO_VI.values()])


class RoleForm(FlaskForm):
    name = StringField('Role name', validators=[DataRequired(), Length(max=50)])


class RolePermissionsForm(FlaskForm):
    permission_ids = SelectMultipleField('Permissions', choices=[], validate_choice=False)
