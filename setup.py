from setuptools import find_packages, setup


def long_description():
    try:
        with open("README.md", encoding="utf-8") as readme:
            return readme.read()
    except FileNotFoundError:
        return ""


setup(
    name="env_deploy",
    version="1.0",
    description="Substitute environment variables in a command and its files, then run it",
    long_description=long_description(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Environment :: Console",
        "Topic :: System :: Systems Administration",
    ],
    author="Camptocamp",
    author_email="info@camptocamp.com",
    url="",
    keywords="kubernetes helm envsubst deployment",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=["pydantic>=2", "pydantic-settings>=2", "PyYAML"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["env-deploy = env_deploy.scripts.env_deploy:main"],
    },
)
