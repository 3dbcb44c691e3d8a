"""Shell commands exposing Tidyground functionalities.

This module contains the shell commands that can be used to interact with Tidyground.

Mammals
=======

``tidyground-mammals`` selects, filters and sorts the mammals dataset::

    tidyground-mammals -c binomial,adult_body_mass_g -m adult_body_mass_g --sort=-adult_body_mass_g -n 5

Without a path it works on the sample of the dataset bundled with the package,
to use the full dataset download it and provide its path::

    tidyground-mammals PanTHERIA_1-0_WR05_Aug2008.txt -c order,binomial -s order,binomial
"""
