"""
Authentication forms using Flask-WTF.
Read from the JSON body; CSRF is enforced by CSRFProtect on the request.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired


class LoginForm(FlaskForm):
    """Login form with username and password."""

    class Meta:
        csrf = False

    username = StringField('Usuario', validators=[
        DataRequired(message='El usuario es requerido')
    ])

    password = PasswordField('Contraseña', validators=[
        DataRequired(message='La contraseña es requerida')
    ])

    remember_me = BooleanField('Recordarme')
