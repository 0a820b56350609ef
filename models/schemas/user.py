from marshmallow import EXCLUDE, Schema, fields, validate, validates, ValidationError


class _BodySchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_BodySchema):
    # emails are case-sensitive identifiers, stored as given
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=255))

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class LoginSchema(_BodySchema):
    email = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class RefreshTokenSchema(_BodySchema):
    refresh_token = fields.String(required=True, data_key="refreshToken", validate=validate.Length(min=1))


class LogoutSchema(_BodySchema):
    refresh_token = fields.String(load_default=None, allow_none=True, data_key="refreshToken")


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    name = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
