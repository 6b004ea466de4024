from setuptools import setup, find_packages

with open('README.md', 'r') as readme:
    long_description = readme.read()

setup(
    name='polyspline', 
    version='1.0.0', 
    description='A symbolic/numeric algebra engine for B-spline curves.', 
    long_description=long_description, 
    long_description_content_type='text/markdown', 
    packages=find_packages(include=['polyspline', 'polyspline.*']), 
    python_requires='>=3.9', 
    install_requires=['numpy', 'numba', 'scipy', 'matplotlib'], 
    extras_require={'test': ['pytest']}, 
    classifiers=['Programming Language :: Python :: 3', 
                 'Operating System :: OS Independent'], 
    
)
