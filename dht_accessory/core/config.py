from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.models import SensorConfig, SensorKind


class AccessoryConfig(BaseModel):
    # Accepts the camelCase keys used by existing bridge configs as well
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    name_temperature: Optional[str] = None
    name_humidity: Optional[str] = None

    # "Temperature" = CPU temperature only, "dht22" = temperature + humidity
    service: Literal["Temperature", "dht22"] = "dht22"
    gpio: str = "4"
    refresh: int = Field(default=60, gt=0)  # seconds between reads

    # Reader programs
    dht_exec: str = Field(default="dht22", alias="dhtExec")
    cputemp: str = "cputemp"

    # Hardening: unset means wait for the reader indefinitely
    reader_timeout_s: Optional[float] = Field(default=None, gt=0)
    sample_on_start: bool = False

    @field_validator("gpio", mode="before")
    @classmethod
    def _gpio_as_str(cls, v):
        return str(v)

    @model_validator(mode="after")
    def _default_channel_names(self):
        if self.name_temperature is None:
            self.name_temperature = self.name
        if self.name_humidity is None:
            self.name_humidity = self.name
        return self

    @property
    def kind(self) -> SensorKind:
        return SensorKind(self.service)

    def to_sensor_config(self) -> SensorConfig:
        if self.kind is SensorKind.TEMPERATURE_HUMIDITY:
            command, args = self.dht_exec, ("-g", self.gpio)
        else:
            command, args = self.cputemp, ()
        return SensorConfig(
            kind=self.kind,
            reader_command=command,
            reader_args=args,
            poll_interval_s=self.refresh,
            name=self.name,
            name_temperature=self.name_temperature or self.name,
            name_humidity=self.name_humidity or self.name,
            reader_timeout_s=self.reader_timeout_s,
            sample_on_start=self.sample_on_start,
        )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "DHT Accessory Bridge"

    # Logging
    log_level: str = "INFO"
    log_file: str = "dht_accessory.log"  # empty disables the file handler

    # JSON list in $ACCESSORIES
    accessories: list[AccessoryConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self):
        seen: set[str] = set()
        for acc in self.accessories:
            if acc.name in seen:
                raise ValueError(f"Duplicate accessory name: {acc.name}")
            seen.add(acc.name)
        return self


settings = Settings()
