from pydantic import BaseModel
from typing import Optional, Literal

Theme = Literal["light", "dark", "auto"]
ColorPalette = Literal["blue", "purple", "green", "orange", "pink", "indigo", "teal", "red"]
GlassEffect = Literal["translucent", "transparent", "opaque"]
Language = Literal["en", "es", "fr", "de", "it", "pt", "ru", "zh", "ja", "ko", "ar", "hi"]


class AppearanceSettings(BaseModel):
    theme: Theme = "light"
    color_palette: ColorPalette = "blue"
    glass_effect: GlassEffect = "translucent"
    language: Language = "en"

    class Config:
        from_attributes = True


class AppearanceUpdate(BaseModel):
    theme: Optional[Theme] = None
    color_palette: Optional[ColorPalette] = None
    glass_effect: Optional[GlassEffect] = None
    language: Optional[Language] = None


class AppearanceSaveResponse(BaseModel):
    success: bool
    settings: Optional[dict] = None
