import math

from wtforms import FloatField
from wtforms.validators import DataRequired, Length, Optional

from linepicks.forms import ApiForm, TextField


class PickForm(ApiForm):
    event_id = TextField(
        "Event", name="eventId", validators=[DataRequired(), Length(max=100)]
    )
    # The web client sends "team"; "selection" is accepted as well
    team = TextField("Team", validators=[Optional(), Length(max=100)])
    selection = TextField("Selection", validators=[Optional(), Length(max=100)])
    # No InputRequired here: a line of 0 (pick'em) is falsy but valid
    line = FloatField("Line")

    def validate(self, extra_validators=None):
        valid = super().validate(extra_validators=extra_validators)

        if not self.chosen_side:
            self.team.errors = list(self.team.errors) + ["A team selection is required"]
            valid = False

        if not self.line.errors:
            if self.line.data is None:
                self.line.errors = ["Line is required"]
                valid = False
            elif not math.isfinite(self.line.data):
                self.line.errors = ["Line must be a finite number"]
                valid = False

        return valid

    @property
    def chosen_side(self):
        side = self.team.data or self.selection.data or ""
        return side.strip() if isinstance(side, str) else ""
