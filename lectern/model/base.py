import datetime

import pydantic as p


class BaseModel(p.BaseModel):
    """Base for stored entities and their snapshots.

    Keys a stored document carries but the model does not declare are dropped
    on load, so older records keep validating after a field is removed.
    """

    model_config = p.ConfigDict(extra="ignore")


class WithTimestamps(BaseModel):
    create_time: datetime.datetime
    update_time: datetime.datetime
