from setuptools import setup
setup(
    name="clearskies",
    version="0.1",
    description="Clear sky models and Reno clear sky detection for broadband irradiance measurements.",
    license="CC BY-NC",
    packages=["clearskies"],
    package_dir={"":"src"},
    python_requires=">=3.9",
    install_requires=["numpy",
                      "scipy",
                      ],
    extras_require={"test": ["pytest"]},
        )
