"""Front-end helpers: formatting, completion, highlighting, validation, progress, system commands, prompt, history and banner."""