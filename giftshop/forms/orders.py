"""Order, checkout and storefront forms."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.validators import DataRequired, Email, Length, Optional


class PromoCodeForm(FlaskForm):
    """Promotion code entry shared by the order and batch checkout pages."""
    promo_code = StringField('Promotion code', validators=[
        Optional(),
        Length(max=50)
    ])
    apply_promo = SubmitField('Apply')
    remove_promo = SubmitField('Remove')


class OrderForm(PromoCodeForm):
    """Order page for one configured product.

    ``shipping_id`` choices are filled in by the view from the shipping fees
    of the selected area.
    """
    area = SelectField('Area', choices=[], validate_choice=False)
    shipping_id = SelectField('Shipping method', choices=[], validate_choice=False)
    add_to_cart = SubmitField('Add to cart')
    place_order = SubmitField('Place order')


class BatchCheckoutForm(PromoCodeForm):
    """Checkout of every cart item as one order."""
    name = StringField('Full Name', validators=[
        DataRequired(message='Name is required'),
        Length(min=2, max=100)
    ])
    phone = StringField('Phone Number', validators=[
        DataRequired(message='Phone number is required'),
        Length(min=9, max=15, message='Please enter a valid phone number')
    ])
    email = StringField('Email', validators=[
        Optional(),
        Email(message='Please enter a valid email address')
    ])
    address = StringField('Delivery address', validators=[
        Optional(),
        Length(max=500)
    ])
    notes = TextAreaField('Notes', validators=[
        Optional(),
        Length(max=1000)
    ])
    area = SelectField('Area', choices=[], validate_choice=False)
    shipping_id = SelectField('Shipping method', choices=[], validate_choice=False)
    place_order = SubmitField('Place order')


class TrackOrderForm(FlaskForm):
    """Order lookup by order code or email."""
    order_code = StringField('Order code', validators=[Optional(), Length(max=50)])
    email = StringField('Email', validators=[
        Optional(),
        Email(message='Please enter a valid email address')
    ])

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators):
            return False
        if not (self.order_code.data or self.email.data):
            self.order_code.errors.append('Enter an order code or an email address.')
            return False
        return True


class ConsultationForm(FlaskForm):
    """Request a call back from our staff."""
    customer_name = StringField('Your name', validators=[
        DataRequired(message='Name is required'),
        Length(min=2, max=100)
    ])
    phone_number = StringField('Phone Number', validators=[
        DataRequired(message='Phone number is required'),
        Length(min=9, max=15)
    ])
