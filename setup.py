from setuptools import setup, find_packages

setup(
    name="letter-extractor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "PyMuPDF>=1.23.0",
        "pdfplumber>=0.10.0",
        "pytesseract>=0.3.10",
        "Pillow>=10.0.0",
        "httpx>=0.25.0",
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
        "fastapi>=0.104.0",
        "uvicorn>=0.24.0",
        "python-multipart>=0.0.6",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "hypothesis>=6.90.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "letter-extract=letter_extractor.cli:main",
            "letter-extract-url=letter_extractor.cli:extract_url",
        ],
    },
)
