from marshmallow import EXCLUDE, Schema, fields, validate, validates_schema, ValidationError

from models.task import TaskStatus

_title = validate.Length(min=1, max=200, error="Title must be between 1 and 200 characters.")


class TaskCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=_title)
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus, load_default=TaskStatus.PENDING)


class TaskUpdateSchema(Schema):
    # All optional, but validate if present
    class Meta:
        unknown = EXCLUDE

    title = fields.String(validate=_title)
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus)

    @validates_schema
    def _not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one of title, description or status is required.")


class TaskQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1))
    status = fields.Enum(TaskStatus, load_default=None)
    search = fields.String(load_default=None)


class TaskOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus)
    user_id = fields.String(data_key="userId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
