"""Label modules: backlight, clock, custom and disk."""