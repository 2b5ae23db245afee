from setuptools import setup

with open("README.md", encoding="utf8") as readme_file:
    readme = readme_file.read()

with open("requirements.txt", encoding="utf8") as requirements_file:
    requirements = [line for line in requirements_file.read().splitlines() if line]

setup(
    name="spotify-to-youtube",
    version="1.0.0",
    description="Migrate your Spotify playlists to YouTube.",
    long_description=readme,
    long_description_content_type="text/markdown",
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "pytest-asyncio", "sanic-testing"],
    },
    author="Hexiro",
    packages=["spotify_to_youtube", "spotify_to_youtube.typings"],
    package_data={"spotify_to_youtube": ["py.typed"]},
    entry_points={
        "console_scripts": [
            "spotify_to_youtube = spotify_to_youtube.__main__:cli",
            "spotify-to-youtube = spotify_to_youtube.__main__:cli",
        ]
    },
    python_requires=">=3.9",
    license="GPLv3",
    zip_safe=False,
    classifiers=[
        "Natural Language :: English",
        "Environment :: Console",
        "Environment :: Web Environment",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
        "Topic :: Multimedia :: Sound/Audio",
    ],
)
