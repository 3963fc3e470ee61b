"""
Input schemas for parking operations.
Plain WTForms forms fed from a JSON payload (see utils.actions); CSRF is
enforced for the whole request by CSRFProtect, not per form.
"""

from wtforms import Form, DateField, FieldList, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange, Optional

from utils.messages import MESSAGES

NOTES_MAX_LENGTH = 500
VISITOR_TEXT_MAX_LENGTH = 200


class IsoDateField(DateField):
    """DateField accepting YYYY-MM-DD with a Spanish parse error."""

    def __init__(self, label=None, validators=None, format='%Y-%m-%d', **kwargs):
        super().__init__(label, validators, format=format, **kwargs)

    def process_formdata(self, valuelist):
        try:
            super().process_formdata(valuelist)
        except ValueError:
            raise ValueError(MESSAGES['invalid_date'])


class IdField(IntegerField):
    """Positive integer identifier."""

    def __init__(self, label=None, validators=None, **kwargs):
        validators = validators or [
            InputRequired(message=MESSAGES['field_required']),
            NumberRange(min=1, message=MESSAGES['invalid_data']),
        ]
        super().__init__(label, validators, **kwargs)

    def process_formdata(self, valuelist):
        try:
            super().process_formdata(valuelist)
        except ValueError:
            raise ValueError(MESSAGES['invalid_data'])


def _required_date(label):
    return IsoDateField(label, validators=[InputRequired(message=MESSAGES['field_required'])])


# =============================================================================
# QUERIES
# =============================================================================

class DateQueryForm(Form):
    """Single-day query (?date=YYYY-MM-DD)."""

    date = _required_date('Fecha')


class MonthQueryForm(Form):
    """Month query (?month=YYYY-MM). Defaults to the current month."""

    month = IsoDateField('Mes', validators=[Optional()], format=['%Y-%m', '%Y-%m-%d'])


class ReconcileForm(Form):
    since = IsoDateField('Desde', validators=[Optional()])


# =============================================================================
# RESERVATIONS AND CESSIONS
# =============================================================================

class CreateReservationForm(Form):
    spot_id = IdField('Plaza')
    date = _required_date('Fecha')
    notes = TextAreaField('Notas', validators=[
        Optional(),
        Length(max=NOTES_MAX_LENGTH)
    ])


class CancelReservationForm(Form):
    reservation_id = IdField('Reserva')


class CancelCessionForm(Form):
    cession_id = IdField('Cesión')


class CreateCessionForm(Form):
    spot_id = IdField('Plaza')
    dates = FieldList(
        _required_date('Día'),
        min_entries=0,
        validators=[Length(min=1, message=MESSAGES['select_one_day'])]
    )


# =============================================================================
# VISITORS
# =============================================================================

class CreateVisitorForm(Form):
    spot_id = IdField('Plaza')
    date = _required_date('Fecha')
    visitor_name = StringField('Nombre', validators=[
        DataRequired(message=MESSAGES['visitor_name_required']),
        Length(max=VISITOR_TEXT_MAX_LENGTH)
    ])
    visitor_company = StringField('Empresa', validators=[
        DataRequired(message=MESSAGES['visitor_company_required']),
        Length(max=VISITOR_TEXT_MAX_LENGTH)
    ])
    visitor_email = StringField('Email', validators=[
        DataRequired(message=MESSAGES['field_required']),
        Email(message=MESSAGES['invalid_email']),
        Length(max=VISITOR_TEXT_MAX_LENGTH)
    ])
    notes = TextAreaField('Notas', validators=[
        Optional(),
        Length(max=NOTES_MAX_LENGTH)
    ])


class CancelVisitorForm(Form):
    booking_id = IdField('Reserva')


class UpdateVisitorForm(Form):
    """Partial update: every field except the booking id is optional."""

    booking_id = IdField('Reserva')
    spot_id = IdField('Plaza', validators=[
        Optional(),
        NumberRange(min=1, message=MESSAGES['invalid_data'])
    ])
    date = IsoDateField('Fecha', validators=[Optional()])
    visitor_name = StringField('Nombre', validators=[
        Optional(),
        Length(min=1, max=VISITOR_TEXT_MAX_LENGTH)
    ])
    visitor_company = StringField('Empresa', validators=[
        Optional(),
        Length(min=1, max=VISITOR_TEXT_MAX_LENGTH)
    ])
    visitor_email = StringField('Email', validators=[
        Optional(),
        Email(message=MESSAGES['invalid_email']),
        Length(max=VISITOR_TEXT_MAX_LENGTH)
    ])
    notes = TextAreaField('Notas', validators=[
        Optional(),
        Length(max=NOTES_MAX_LENGTH)
    ])
