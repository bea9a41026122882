import re
from typing import Any, Dict

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validates, validate

BOOKING_STATUSES = ["pending", "confirmed", "paid", "cancelled"]
TICKET_TIER_IDS = ["silver", "gold"]


class BookingFormSchema(Schema):
    """What the customer submits. Amounts sent by the client are dropped."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True)
    email = fields.Email(required=True, error_messages={"invalid": "Please enter a valid email address"})
    phone = fields.Str(required=True)
    showtime = fields.Str(required=True, validate=validate.Length(min=1, error="Please select a showtime"))
    tickets = fields.Integer(
        load_default=1,
        validate=validate.Range(min=1, error="Please select number of tickets"),
        error_messages={"invalid": "Please select number of tickets"},
    )
    ticket_tier = fields.Str(load_default="silver")
    seats = fields.List(fields.Str(), load_default=list)

    @pre_load
    def strip_text_fields(self, data: Dict[str, Any], **kwargs):
        data = dict(data)
        for key in ("name", "email", "phone", "showtime"):
            value = data.get(key)
            if isinstance(value, str):
                data[key] = value.strip()
        return data

    @validates("name")
    def validate_name(self, value: str, **kwargs):
        if len(value) < 2:
            raise ValidationError("Name must be at least 2 characters")

    @validates("phone")
    def validate_phone(self, value: str, **kwargs):
        if len(re.sub(r"\D", "", value)) < 10:
            raise ValidationError("Phone number must be at least 10 digits")


class BookingRecordSchema(Schema):
    """Wire and storage layout of a booking (camelCase keys)."""

    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    customer_name = fields.Str(required=True, data_key="customerName")
    customer_email = fields.Str(required=True, data_key="customerEmail")
    customer_phone = fields.Str(required=True, data_key="customerPhone")
    movie_title = fields.Str(required=True, data_key="movieTitle")
    movie_id = fields.Str(required=True, data_key="movieId")
    showtime = fields.Str(required=True)
    ticket_tier = fields.Str(required=True, data_key="ticketTier", validate=validate.OneOf(TICKET_TIER_IDS))
    number_of_tickets = fields.Integer(required=True, data_key="numberOfTickets")
    total_amount = fields.Integer(required=True, data_key="totalAmount")
    booking_date = fields.Str(required=True, data_key="bookingDate")
    status = fields.Str(required=True, validate=validate.OneOf(BOOKING_STATUSES))
    seats = fields.List(fields.Str(), load_default=list)
    payment_id = fields.Str(allow_none=True, load_default=None, data_key="paymentId")
    qr_code = fields.Str(allow_none=True, load_default=None, data_key="qrCode")


class StatusUpdateSchema(Schema):
    status = fields.Str(
        required=True,
        validate=validate.OneOf(BOOKING_STATUSES, error="Status must be one of: {choices}"),
    )


booking_form_schema = BookingFormSchema()
booking_record_schema = BookingRecordSchema()
status_update_schema = StatusUpdateSchema()
