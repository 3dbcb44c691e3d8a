"""Explore the bundled sample of the mammals dataset."""

from tidyground.dataframe import col, count, desc, ends_with, mean, median, n
from tidyground.dataframe import verbs
from tidyground.datasets import load_mammals
from tidyground.utils.logging_setup import setup_logging

setup_logging("INFO")

mammals = load_mammals()
print(mammals.select("binomial", ends_with("_g"), ends_with("_mm")))

# The heaviest mammals first, with their mass per millimeter of body.
print(
    mammals.mutate(mass_per_mm=col("adult_body_mass_g") / col("adult_head_body_len_mm"))
    .filter(col("mass_per_mm").is_valid())
    .arrange(desc("mass_per_mm"))
    .select("binomial", "mass_per_mm")
    .head()
)

# The same query, nesting function calls.
print(
    verbs.head(
        verbs.select(
            verbs.arrange(
                verbs.filter(
                    verbs.mutate(
                        mammals,
                        mass_per_mm=col("adult_body_mass_g") / col("adult_head_body_len_mm"),
                    ),
                    col("mass_per_mm").is_valid(),
                ),
                desc("mass_per_mm"),
            ),
            "binomial",
            "mass_per_mm",
        )
    )
)

# Litter sizes by order, missing values propagate unless skipped.
print(
    mammals.group_by("order").summarise(
        species=n(),
        known_litters=count("litter_size"),
        mean_litter=mean("litter_size"),
        mean_known_litter=mean("litter_size", skip_nulls=True),
        median_mass=median("adult_body_mass_g"),
    )
)

print(mammals.filter(col("adult_body_mass_g") > 100000).explain())
