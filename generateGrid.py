import logging
import math
import sys
from typing import Annotated, Any, Literal, Optional, TextIO, Union

import jinja2
import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, computed_field

logger = logging.getLogger(__name__)

# pixeles por milimetro a 96 DPI
MM_TO_PX = 3.779527559

UNIT_TO_MM = {
    'mm': 1.0,
    'cm': 10.0,
    'in': 25.4,
}

# tamaños comunes de pagina en cada unidad (ancho, alto)
PAGE_SIZES = {
    'A4': {'mm': (210.0, 297.0), 'cm': (21.0, 29.7), 'in': (8.27, 11.69)},
    'Letter': {'mm': (216.0, 279.0), 'cm': (21.6, 27.9), 'in': (8.5, 11.0)},
}

DEFAULT_FILENAME = 'grid-pattern.svg'

# limites para que el documento siempre sea finito y de tamaño acotado
MAX_MAGNITUDE = 1e9
MIN_SPACING = 0.5
MAX_POSITIONS = 500


def coerce_number(value: Any) -> float:
    # igual que parseFloat(x) || 0 en el formulario, ademas descarta nan/inf
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(-MAX_MAGNITUDE, min(number, MAX_MAGNITUDE))


Number = Annotated[float, BeforeValidator(coerce_number)]


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)
    page_width: Number = 210.0
    page_height: Number = 297.0
    page_unit: Literal['mm', 'cm', 'in'] = 'mm'
    grid_type: Literal['lines', 'dots'] = 'lines'
    grid_spacing_x: Number = 10.0
    grid_spacing_y: Number = 10.0
    line_width: Number = 0.2
    # diametro del punto
    dot_size: Number = 0.5
    rectangle_width: Number = 100.0
    rectangle_height: Number = 80.0
    rectangle_border_width: Number = 0.4

    @computed_field
    def page_width_mm(self) -> float:
        return self.page_width * UNIT_TO_MM[self.page_unit]

    @computed_field
    def page_height_mm(self) -> float:
        return self.page_height * UNIT_TO_MM[self.page_unit]

    @computed_field
    def rectangle_x(self) -> float:
        return (self.page_width_mm - self.rectangle_width) / 2

    @computed_field
    def rectangle_y(self) -> float:
        return (self.page_height_mm - self.rectangle_height) / 2


TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{{ width_mm|round(6) }}mm" height="{{ height_mm|round(6) }}mm" viewBox="0 0 {{ width|round(6) }} {{ height|round(6) }}">
  <defs>
    <style>
      .page-boundary { fill: none; stroke: #000; stroke-width: 1; }
      .rectangle { fill: none; stroke: #000; stroke-width: {{ border_width|round(6) }}; }
      .grid-line { stroke: #666; stroke-width: {{ line_width|round(6) }}; }
      .grid-dot { fill: #666; stroke: none; }
    </style>
  </defs>
  <!-- Page boundary -->
  <rect class="page-boundary" x="0" y="0" width="{{ width|round(6) }}" height="{{ height|round(6) }}" />
  <!-- Grid -->
{% if grid_type == 'dots' %}
{% for y in ys %}
{% for x in xs %}
  <circle class="grid-dot" cx="{{ x|round(6) }}" cy="{{ y|round(6) }}" r="{{ radius|round(6) }}" />
{% endfor %}
{% endfor %}
{% else %}
{% for x in xs %}
  <line class="grid-line" x1="{{ x|round(6) }}" y1="{{ top|round(6) }}" x2="{{ x|round(6) }}" y2="{{ bottom|round(6) }}" />
{% endfor %}
{% for y in ys %}
  <line class="grid-line" x1="{{ left|round(6) }}" y1="{{ y|round(6) }}" x2="{{ right|round(6) }}" y2="{{ y|round(6) }}" />
{% endfor %}
{% endif %}
  <!-- Rectangle -->
  <rect class="rectangle" x="{{ left|round(6) }}" y="{{ top|round(6) }}" width="{{ rect_width|round(6) }}" height="{{ rect_height|round(6) }}" />
</svg>
"""

jinja_env = jinja2.Environment(trim_blocks=True, lstrip_blocks=True, autoescape=False)
svg_tpl = jinja_env.from_string(TEMPLATE)


def axis_positions(start: float, extent: float, spacing: float) -> list[float]:
    # incluye ambos bordes; con espaciado <= 0 solo queda el borde inicial
    if extent < 0:
        return []
    if spacing <= 0:
        logger.debug('Non-positive grid spacing %s, keeping only the leading edge', spacing)
        return [start]
    if spacing < MIN_SPACING:
        logger.debug('Grid spacing %s below %smm, clamping', spacing, MIN_SPACING)
        spacing = MIN_SPACING
    count = math.floor(extent / spacing + 1e-9) + 1
    if count > MAX_POSITIONS:
        # se reparte la grilla en MAX_POSITIONS posiciones de borde a borde
        logger.debug('%s grid positions over %smm, keeping %s', count, extent, MAX_POSITIONS)
        spacing = extent / (MAX_POSITIONS - 1)
        count = MAX_POSITIONS
    return [start + i * spacing for i in range(count)]


def grid_positions(settings: Settings) -> tuple[list[float], list[float]]:
    # la grilla parte de la esquina superior izquierda del rectangulo
    xs = axis_positions(settings.rectangle_x, settings.rectangle_width, settings.grid_spacing_x)
    ys = axis_positions(settings.rectangle_y, settings.rectangle_height, settings.grid_spacing_y)
    return [x * MM_TO_PX for x in xs], [y * MM_TO_PX for y in ys]


def generate(settings: Settings) -> str:
    if settings.rectangle_x < 0 or settings.rectangle_y < 0:
        logger.debug('Rectangle %sx%smm exceeds the %sx%smm page',
                     settings.rectangle_width, settings.rectangle_height,
                     settings.page_width_mm, settings.page_height_mm)
    xs, ys = grid_positions(settings)
    left = settings.rectangle_x * MM_TO_PX
    top = settings.rectangle_y * MM_TO_PX
    rect_width = settings.rectangle_width * MM_TO_PX
    rect_height = settings.rectangle_height * MM_TO_PX
    return svg_tpl.render(
        width_mm=settings.page_width_mm,
        height_mm=settings.page_height_mm,
        width=settings.page_width_mm * MM_TO_PX,
        height=settings.page_height_mm * MM_TO_PX,
        border_width=settings.rectangle_border_width * MM_TO_PX,
        line_width=settings.line_width * MM_TO_PX,
        radius=settings.dot_size / 2 * MM_TO_PX,
        grid_type=settings.grid_type,
        xs=xs,
        ys=ys,
        left=left,
        top=top,
        right=left + rect_width,
        bottom=top + rect_height,
        rect_width=rect_width,
        rect_height=rect_height,
    )


def format_mm(value: float) -> str:
    return f'{value:g}'


def describe(settings: Settings) -> str:
    if settings.grid_type == 'lines':
        kind = 'Grid Lines'
        stroke = f'Line width: {format_mm(settings.line_width)}mm'
    else:
        kind = 'Dots'
        stroke = f'Dot size: {format_mm(settings.dot_size)}mm'
    return (
        f'{kind}: {format_mm(settings.grid_spacing_x)}mm × {format_mm(settings.grid_spacing_y)}mm spacing • '
        f'{stroke} • '
        f'Rectangle: {format_mm(settings.rectangle_width)}mm × {format_mm(settings.rectangle_height)}mm'
    )


def load_yaml(obj: Union[str, bytes, TextIO]) -> Settings:
    yml = yaml.safe_load(obj)
    return Settings.model_validate(yml or {})


def settings_to_yaml(settings: Settings) -> str:
    return yaml.dump(settings.model_dump(), default_flow_style=False,
                     sort_keys=False, allow_unicode=True)


def main(argv: Optional[list[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    config = argv[0] if len(argv) > 0 else None
    outname = argv[1] if len(argv) > 1 else DEFAULT_FILENAME

    if config:
        try:
            with open(config, encoding='utf-8') as f:
                settings = load_yaml(f)
        except (OSError, yaml.YAMLError, ValueError):
            logger.exception('Could not load settings from %s', config)
            return 1
    else:
        settings = Settings()

    svg = generate(settings)
    with open(outname, 'w', encoding='utf-8') as f:
        f.write(svg)
    logger.info('Wrote %s (%s)', outname, describe(settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
