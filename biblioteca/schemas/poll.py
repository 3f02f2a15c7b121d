from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError, pre_load

from ..extensions import ma


class _PollWriteSchema(Schema):
    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("title"), str):
            data["title"] = data["title"].strip()
        if isinstance(data.get("options"), list):
            data["options"] = [o.strip() if isinstance(o, str) else o for o in data["options"]]
        return data


class PollCreateSchema(_PollWriteSchema):
    title = fields.Str(required=True, validate=validate.Length(min=3, max=200))
    description = fields.Str(required=False, allow_none=True, validate=validate.Length(max=1000))
    options = fields.List(
        fields.Str(validate=validate.Length(min=1, max=200)),
        required=True,
        validate=validate.Length(min=2),
    )
    end_time = fields.DateTime(required=True)

    @validates("options")
    def options_distinct(self, value, **kwargs):
        if len(set(value)) != len(value):
            raise ValidationError("Options must be distinct")


class PollUpdateSchema(_PollWriteSchema):
    title = fields.Str(required=False, validate=validate.Length(min=3, max=200))
    description = fields.Str(required=False, allow_none=True, validate=validate.Length(max=1000))
    end_time = fields.DateTime(required=False)
    active = fields.Bool(required=False)

    @validates_schema
    def at_least_one_field(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be provided")


class PollReadSchema(ma.Schema):
    id = fields.UUID()
    title = fields.Str()
    description = fields.Str(allow_none=True)
    options = fields.List(fields.Str())
    end_time = fields.DateTime()
    active = fields.Bool()
    state = fields.Method("get_state")
    created_by = fields.UUID(allow_none=True)
    creator_name = fields.Method("get_creator_name")
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    def get_state(self, poll):
        return poll.state()

    def get_creator_name(self, poll):
        return poll.creator.name if poll.creator else None
