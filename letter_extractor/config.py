"""Configuration settings for the letter extractor"""
import os
from dotenv import load_dotenv

load_dotenv()

# Text acquisition
MIN_EMBEDDED_TEXT_LENGTH = int(os.getenv("MIN_EMBEDDED_TEXT_LENGTH", "100"))  # below this a page is treated as scan-only
OCR_RENDER_SCALE = float(os.getenv("OCR_RENDER_SCALE", "3.0"))  # rasterization zoom for OCR, keep >= 3
OCR_LANGUAGES = os.getenv("OCR_LANGUAGES", "ind+eng")  # Indonesian plus English
TESSERACT_CMD = os.getenv("TESSERACT_CMD")  # optional path to the tesseract binary

# Input validation
MAX_FILE_SIZE_BYTES = int(os.getenv("MAX_FILE_SIZE_BYTES", str(10 * 1024 * 1024)))  # 10 MB
MIN_TOTAL_TEXT_LENGTH = int(os.getenv("MIN_TOTAL_TEXT_LENGTH", "50"))
DIGITAL_PDF_MIN_CHARS = 50  # non-whitespace embedded chars that mark a PDF as already digital
DIGITAL_PDF_PAGES_CHECKED = 3

# Parsing
LETTERHEAD_SCAN_LIMIT = 15
MIN_PARAGRAPH_LENGTH = 15
KNOWN_CITIES = [
    city.strip()
    for city in os.getenv(
        "KNOWN_CITIES",
        "Palembang,Jakarta,Bandung,Medan,Surabaya,Semarang,Makassar,Yogyakarta,Denpasar",
    ).split(",")
    if city.strip()
]

# URL input
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
DEFAULT_FETCHED_FILENAME = "arsip.pdf"

# Cache configuration ("content" hashes the bytes, "name_size" keys on file name and size)
CACHE_KEY_MODE = os.getenv("CACHE_KEY_MODE", "content")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
