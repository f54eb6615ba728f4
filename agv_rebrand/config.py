from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Consulta PE AGV Rebrand"
    env: str = "local"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    remote_base: str = "https://web-production-75681.up.railway.app"
    upstream_path: str = "/agv"
    upstream_timeout_seconds: float = 20.0

    public_dir: str = "public"
    public_url_prefix: str = "/public"
    background_path: str = "public/bg.png"
    logo_path: str = "public/logo.png"
    font_path: str | None = None  # None -> Pillow bundled font
    output_prefix: str = "agv_rebrand"
    bot_identifier: str = "@LEDERDATA_OFC_BOT"

    output_width: int = 1080
    output_height: int = 1920
    background_color: str = "#092230"

    # Grid heuristic, tuned against the upstream "arbol genealogico" layout.
    grid_cols: int = 7
    grid_rows: int = 5
    thumb_min_variance: float = 800.0
    skin_ratio_threshold: float = 0.02
    skin_weight: float = 1000.0

    max_thumbnails: int = 30
    thumb_columns: int = 3
    thumb_gap: int = 12
    thumb_border_px: int = 3
    thumb_border_alpha: int = 150
    logo_width: int = 220

    title_prefix: str = "ÁRBOL GENEALÓGICO"
    footer_title: str = "Consulta PE • Información reconstruida"
    footer_subtitle: str = "Generado automáticamente. No es documento oficial."
    text_columns: int = 2
    text_column_gap: int = 24
    text_line_height: int = 26
    layout_top: int = 150
    footer_margin: int = 300

    ocr_provider: str = "auto"  # auto|tesseract|null
    ocr_languages: str = "eng+spa"
    ocr_timeout_seconds: float = 60.0
    tesseract_cmd: str | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
