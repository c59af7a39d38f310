"""
Barcode utilities for product labels.

Provides:
- EAN-13 style SKU generation for products created without a SKU
- Code128 barcode images of a SKU
- Printable labels (name, SKU, price and barcode)
"""

import io
import secrets
import time

import barcode
from barcode.writer import ImageWriter
from PIL import Image, ImageDraw, ImageFont


def ean13_check_digit(digits: str) -> int:
    """
    Compute the EAN-13 check digit for a 12 digit string.

    Digits in odd positions (1st, 3rd, ...) weigh 1, even positions weigh 3.
    """
    if len(digits) != 12 or not digits.isdigit():
        raise ValueError("EAN-13 check digit needs exactly 12 digits")

    total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits))
    return (10 - (total % 10)) % 10


def generate_sku() -> str:
    """
    Generate a 13 digit EAN-style SKU.

    9 digits from the millisecond clock plus 3 random digits, followed by the
    EAN-13 check digit, so the value scans on ordinary retail scanners.
    """
    timestamp = str(int(time.time() * 1000))[-9:]
    rand = f"{secrets.randbelow(1000):03d}"
    base = f"{timestamp}{rand}"
    return f"{base}{ean13_check_digit(base)}"


def generate_barcode_image(code: str, barcode_type: str = "code128") -> bytes:
    """
    Generate barcode image.

    Args:
        code: The code to encode
        barcode_type: Type of barcode (code128, ean13, etc.)

    Returns:
        PNG image as bytes
    """
    barcode_class = barcode.get_barcode_class(barcode_type)
    barcode_instance = barcode_class(code, writer=ImageWriter())

    buffer = io.BytesIO()
    barcode_instance.write(
        buffer,
        options={
            "module_width": 0.3,
            "module_height": 15.0,
            "quiet_zone": 6.5,
            "font_size": 10,
            "text_distance": 5.0,
            "background": "white",
            "foreground": "black",
        },
    )

    buffer.seek(0)
    return buffer.getvalue()


def generate_product_label(name: str, sku: str, price: str, size: tuple = (400, 200)) -> bytes:
    """
    Generate printable product label with barcode.

    Args:
        name: Product name
        sku: Product SKU (also the barcode payload)
        price: Product price
        size: Label size (width, height)

    Returns:
        PNG image as bytes
    """
    img = Image.new("RGB", size, color="white")
    draw = ImageDraw.Draw(img)

    # Try to use a nice font, fall back to default
    try:
        title_font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 16)
        text_font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 12)
    except OSError:
        title_font = ImageFont.load_default()
        text_font = ImageFont.load_default()

    draw.text((10, 10), name[:30], fill="black", font=title_font)
    draw.text((10, 35), f"SKU: {sku}", fill="black", font=text_font)
    draw.text((10, 55), f"Rs. {price}", fill="black", font=title_font)

    barcode_img = Image.open(io.BytesIO(generate_barcode_image(sku)))
    barcode_img.thumbnail((size[0] - 20, 100))
    img.paste(barcode_img, (10, 85))

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    return buffer.getvalue()
