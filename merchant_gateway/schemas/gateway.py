from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


class GatewayModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore", frozen=True)


class AddressInput(GatewayModel):
    address1: Optional[str] = Field(default=None, max_length=255)
    address2: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=255)
    state: Optional[str] = Field(default=None, max_length=255)
    zip: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=255)


class GatewayOptions(GatewayModel):
    order_id: Union[StrictInt, Annotated[str, Field(max_length=255)], None] = None
    email: Optional[str] = Field(default=None, max_length=255)
    # True vaults under a processor-generated id; a string or integer picks the id.
    store: Union[StrictBool, StrictInt, str, None] = None
    submit_for_settlement: Optional[bool] = None
    merchant_account_id: Optional[str] = None
    billing_address: Optional[AddressInput] = None
    shipping_address: Optional[AddressInput] = None

    @classmethod
    def coerce(cls, options: Union["GatewayOptions", Mapping[str, Any], None]) -> "GatewayOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))

    def merge(self, **overrides: Any) -> "GatewayOptions":
        return self.model_copy(update=overrides)
