"""AlumniConnect: alumni and student networking backend."""
