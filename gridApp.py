#!/usr/bin/env python
# coding: utf-8

import base64
import logging

import streamlit as st
import yaml
from pydantic import ValidationError

from generateGrid import (DEFAULT_FILENAME, PAGE_SIZES, Settings, describe,
                          generate, load_yaml, settings_to_yaml)

logger = logging.getLogger(__name__)

UNIT_LABELS = {
    'mm': 'Millimeters (mm)',
    'cm': 'Centimeters (cm)',
    'in': 'Inches (in)',
}

GRID_LABELS = {
    'lines': 'Grid Lines',
    'dots': 'Dots',
}


def svg_data_uri(svg: str) -> str:
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode('utf-8')).decode('utf-8')


def page_label(settings: Settings) -> str:
    unit = settings.page_unit
    return f'{settings.page_width:g}{unit} × {settings.page_height:g}{unit}'


def load_defaults(config) -> Settings:
    if not config:
        return Settings()
    try:
        return load_yaml(config)
    except (yaml.YAMLError, ValidationError) as e:
        logger.warning('Invalid settings file: %s', e)
        st.error(f'Invalid settings file: {e}')
        return Settings()


def settings_form(defaults: Settings, preset: str) -> dict:
    datos = st.container()
    datos.subheader('Page Dimensions')
    unit = datos.selectbox(
        'Unit',
        options=list(UNIT_LABELS),
        index=list(UNIT_LABELS).index(defaults.page_unit),
        format_func=UNIT_LABELS.get,
        key='page_unit'
    )
    # con un tamaño predefinido el ancho y alto quedan fijos
    # y los campos solo los muestran
    if preset != 'Custom':
        width, height = PAGE_SIZES[preset][unit]
    else:
        width, height = defaults.page_width, defaults.page_height
    step = 0.1 if unit == 'in' else 1.0
    col1, col2 = datos.columns(2)
    settings = {
        'page_unit': unit,
        'page_width': col1.number_input(
            f'Width ({unit})', value=float(width), step=step,
            disabled=preset != 'Custom', key='page_width'
        ),
        'page_height': col2.number_input(
            f'Height ({unit})', value=float(height), step=step,
            disabled=preset != 'Custom', key='page_height'
        ),
    }
    if preset != 'Custom':
        settings['page_width'], settings['page_height'] = width, height
    datos.caption('Common sizes: A4 (210×297mm, 21×29.7cm, 8.27×11.69in) • '
                  'Letter (8.5×11in, 21.6×27.9cm, 216×279mm)')

    grilla = st.container()
    grilla.subheader('Grid Settings')
    settings['grid_type'] = grilla.selectbox(
        'Grid Type',
        options=list(GRID_LABELS),
        index=list(GRID_LABELS).index(defaults.grid_type),
        format_func=GRID_LABELS.get,
        key='grid_type'
    )
    col1, col2 = grilla.columns(2)
    settings['grid_spacing_x'] = col1.number_input(
        'X Spacing (mm)', value=defaults.grid_spacing_x, step=0.1, key='grid_spacing_x'
    )
    settings['grid_spacing_y'] = col2.number_input(
        'Y Spacing (mm)', value=defaults.grid_spacing_y, step=0.1, key='grid_spacing_y'
    )
    if settings['grid_type'] == 'lines':
        settings['line_width'] = grilla.number_input(
            'Line Width (mm)', value=defaults.line_width, step=0.1, key='line_width'
        )
    else:
        settings['dot_size'] = grilla.number_input(
            'Dot Size (mm)', value=defaults.dot_size, step=0.1, key='dot_size',
            help='Diameter of each dot'
        )

    rectangulo = st.container()
    rectangulo.subheader('Rectangle')
    col1, col2 = rectangulo.columns(2)
    settings['rectangle_width'] = col1.number_input(
        'Width (mm)', value=defaults.rectangle_width, step=1.0, key='rectangle_width'
    )
    settings['rectangle_height'] = col2.number_input(
        'Height (mm)', value=defaults.rectangle_height, step=1.0, key='rectangle_height'
    )
    rectangulo.caption('Rectangle is automatically centered on the page')
    settings['rectangle_border_width'] = rectangulo.number_input(
        'Border Width (mm)', value=defaults.rectangle_border_width, step=0.1,
        key='rectangle_border_width'
    )
    return settings


def main():
    st.set_page_config(page_title='SVG Grid Generator', layout='wide')
    st.title('SVG Grid Generator')
    st.write('Create precision grid patterns with customizable spacing and dimensions')

    with st.sidebar:
        config = st.file_uploader(
            'Settings file',
            type=['yml', 'yaml'],
            help='A file saved earlier with "Download settings"'
        )
        preset = st.selectbox(
            'Page size',
            options=['Custom'] + list(PAGE_SIZES),
            key='preset'
        )

    defaults = load_defaults(config)

    form, preview = st.columns([1, 2])
    with form:
        # sin campo de dot_size/line_width visible se mantiene el valor anterior
        values = defaults.model_dump()
        values.update(settings_form(defaults, preset))
    settings = Settings.model_validate(values)
    svg = generate(settings)

    with preview:
        st.subheader('Preview')
        st.caption(page_label(settings))
        st.markdown(
            f'<img src="{svg_data_uri(svg)}" style="max-width: 100%; max-height: 70vh;" />',
            unsafe_allow_html=True
        )
        st.caption(describe(settings))
        st.download_button(
            'Download SVG',
            data=svg,
            file_name=DEFAULT_FILENAME,
            mime='image/svg+xml'
        )
        st.download_button(
            'Download settings',
            data=settings_to_yaml(settings),
            file_name='grid-settings.yml',
            mime='application/x-yaml'
        )


if __name__ == "__main__":
    main()
