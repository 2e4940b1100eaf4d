from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Settings
    PROJECT_NAME: str = "Ecomify Core"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field("development", description="Entorno: development, test, production")
    DEBUG: bool = Field(False, description="Modo debug (expone detalles de errores inesperados)")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")
    LOG_FORMAT: str = Field("colored", description="Formato de logs: colored, json, plain")
    LOG_FILE: str | None = Field(None, description="Archivo opcional para logs en JSON")

    # Database Settings
    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./ecomify.db",
        description="URL asíncrona de SQLAlchemy (postgresql+asyncpg://... en producción)",
    )
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")
    DB_POOL_SIZE: int = Field(20, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(30, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout para obtener conexión del pool")

    # Money
    DEFAULT_CURRENCY: str = Field("BRL", description="Moneda por defecto de carritos y órdenes")
    SUPPORTED_CURRENCIES: list[str] = Field(default=["BRL", "USD"], description="Monedas aceptadas")

    # Payment gateway simulation
    CREDIT_CARD_PROCESSING_DELAY: float = Field(3.0, description="Latencia simulada del gateway de tarjeta (s)")
    PAYPAL_PROCESSING_DELAY: float = Field(0.1, description="Latencia simulada de PayPal (s)")
    REFUND_PROCESSING_DELAY: float = Field(0.0, description="Latencia simulada de reembolsos/cancelaciones (s)")

    # Discounts
    DISCOUNT_RECENT_WINDOW_DAYS: int = Field(7, description="Ventana para contar descuentos recientes por cliente")
    DISCOUNT_MAX_RECENT: int = Field(8, description="Máximo de descuentos recibidos dentro de la ventana")

    # Shipping
    SHIPPING_LOOKUP_URL: str = Field(
        "https://viacep.com.br/ws/{zip_code}/json/",
        description="Servicio de consulta de códigos postales",
    )
    SHIPPING_TIMEOUT: float = Field(10.0, description="Timeout HTTP para la consulta postal (s)")
    ORDER_TRACKING_BASE_URL: str = Field("https://ecomify.com/orders", description="URL base de seguimiento")

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter ISO code")
        return v

    @field_validator("SUPPORTED_CURRENCIES")
    @classmethod
    def normalize_currencies(cls, v: list[str]) -> list[str]:
        return [c.strip().upper() for c in v]

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return v

    @property
    def is_development(self) -> bool:
        """Development-like environments expose internal error details."""
        return self.DEBUG or self.ENVIRONMENT in ("development", "test")

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
