from bedkit.core.strand import Strand
